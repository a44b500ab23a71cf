"""Line-based TCP payment processing server with request validation and graceful shutdown."""

__version__ = "0.1.0"
__all__ = ["__version__"]