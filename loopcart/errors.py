# loopcart/errors.py


class LoopCartError(Exception):
    """Base class for storefront errors."""


class NotFoundError(LoopCartError):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)
        self.message = message


class NotLoggedInError(LoopCartError):
    def __init__(self, message: str = "Please log in first"):
        super().__init__(message)
        self.message = message


class EmptyCartError(LoopCartError):
    def __init__(self, message: str = "Your cart is empty!"):
        super().__init__(message)
        self.message = message
