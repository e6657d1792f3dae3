from .SlidingWindow import SlidingWindow

__all__ = ['SlidingWindow']
