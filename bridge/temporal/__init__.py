from .clock import LogicalClock, ClockExhausted

__all__ = ['LogicalClock', 'ClockExhausted']
