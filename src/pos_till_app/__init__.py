from .state import TillContext

__all__ = ["TillContext"]
