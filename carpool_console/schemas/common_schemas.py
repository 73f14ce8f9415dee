from carpool_console.models.base import ApiModel


class PageAction(ApiModel):
    """A button the UI may render on a page"""

    key: str
    label: str


class MessageResponse(ApiModel):
    message: str
