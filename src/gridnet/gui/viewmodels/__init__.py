from .signal import ObservableProperty, Signal

__all__ = ["ObservableProperty", "Signal"]
