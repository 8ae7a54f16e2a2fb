from .selection import toggle_selection, SelectionController

__all__ = ['toggle_selection', 'SelectionController']
