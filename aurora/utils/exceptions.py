"""Custom exceptions for the Aurora support desk"""


class AuroraError(Exception):
    """Base exception for Aurora"""
    pass


class ConfigError(AuroraError):
    """Configuration error"""
    pass


class InvalidSignature(AuroraError):
    """Login assertion failed HMAC verification (or is malformed)"""
    pass


class NotFoundError(AuroraError):
    """Addressed entity does not exist"""
    pass


class UserNotFound(NotFoundError):
    """No user with the given id"""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__("User not found")


class OrderNotFound(NotFoundError):
    """No order with the given id"""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Order not found")


class TicketNotFound(NotFoundError):
    """No ticket with the given id"""

    def __init__(self, ticket_id: str):
        self.ticket_id = ticket_id
        super().__init__("Ticket not found")


class PermissionDenied(AuroraError):
    """Caller's role does not allow the operation"""
    pass


class StoreUnavailable(AuroraError):
    """Underlying persistence read/write failed"""
    pass
