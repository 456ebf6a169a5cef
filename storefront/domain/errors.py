# storefront/domain/errors.py
"""Bledy domenowe.

Kazdy ma staly ``kind`` (do odczytu maszynowego) i status HTTP.
Serwisy je rzucaja, routery tlumacza na HTTPException.
"""


class StorefrontError(Exception):
    kind = "UNEXPECTED"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class NotFound(StorefrontError):
    kind = "NOT_FOUND"
    status_code = 404


class InsufficientStock(StorefrontError):
    kind = "INSUFFICIENT_STOCK"
    status_code = 400

    def __init__(self, product_id: int, product_name: str | None = None, message: str | None = None):
        super().__init__(message or f"Insufficient stock for {product_name or product_id}")
        self.product_id = product_id
        self.product_name = product_name

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["productId"] = self.product_id
        data["productName"] = self.product_name
        return data


class Forbidden(StorefrontError):
    kind = "FORBIDDEN"
    status_code = 403


class Unauthorized(StorefrontError):
    kind = "UNAUTHORIZED"
    status_code = 401


class InvalidRequest(StorefrontError):
    kind = "INVALID_REQUEST"
    status_code = 400


class InvalidStatus(InvalidRequest):
    kind = "INVALID_STATUS"


class Unexpected(StorefrontError):
    kind = "UNEXPECTED"
    status_code = 500
