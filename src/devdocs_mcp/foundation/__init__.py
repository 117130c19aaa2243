"""Foundation layer: configuration and error types shared by every module."""
