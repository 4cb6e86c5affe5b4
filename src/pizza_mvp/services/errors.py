import enum


class ErrorKind(str, enum.Enum):
    not_found = "not_found"
    payment_provider = "payment_provider"
    invalid_order = "invalid_order"
    persistence = "persistence"


# Клиент получает только эти сообщения; подробности пишутся в лог
ERROR_RESPONSES = {
    ErrorKind.not_found: (404, "Checkout session not found"),
    ErrorKind.payment_provider: (400, "The payment provider rejected the request"),
    ErrorKind.invalid_order: (400, "The order could not be saved because it references unknown data"),
    ErrorKind.persistence: (400, "The order could not be saved"),
}


class CheckoutError(Exception):
    """
    Ошибка оформления заказа с фиксированным видом (ErrorKind).
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)

    @property
    def status_code(self) -> int:
        return ERROR_RESPONSES[self.kind][0]

    @property
    def message(self) -> str:
        return ERROR_RESPONSES[self.kind][1]
