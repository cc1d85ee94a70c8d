"""
Live drawing state: the pointer state machine and inline text capture.
"""
from .draw_session import DrawSession, PointerUpResult, SessionState
from .text_capture import CaptureState, TextCapture

__all__ = [
    'DrawSession',
    'PointerUpResult',
    'SessionState',
    'CaptureState',
    'TextCapture',
]
