"""Exception taxonomy for the flower shop assistant.

A full cart is not an error: the store reports it as a normal result so the
model can relay it to the customer.
"""


class FlowerShopError(RuntimeError):
    """Base class for all failures raised by this package."""


class InvalidRequestError(FlowerShopError):
    """Chat request is missing a cart id or input text."""


class InvalidArgumentError(FlowerShopError, ValueError):
    """A value is outside its allowed domain (e.g. an unknown bouquet size)."""


class CartStoreError(FlowerShopError):
    """The underlying database failed."""


class ToolDispatchError(FlowerShopError):
    """A function call from the model could not be dispatched."""


class UnknownFunctionError(ToolDispatchError):
    pass


class InvalidArgumentsError(ToolDispatchError):
    pass


class ModelServiceError(FlowerShopError):
    """The model service failed or returned something we cannot use."""


class ToolLoopExceededError(FlowerShopError):
    """The model kept requesting tools past the configured round limit."""


class ChatTimeoutError(FlowerShopError):
    pass


class SecretNotFoundError(FlowerShopError):
    pass
