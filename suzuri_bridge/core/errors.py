"""
Error types shared by the bridge.

Every failure in the product pipeline is raised as one of these and turned
into a JSON body of the form {"error": ..., "details": ...} by the handlers
registered in SuzuriBridge.init_app.
"""


class BridgeError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    public_message = None

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {'error': self.public_message or self.message}
        if self.public_message:
            body['details'] = self.message
        elif self.details:
            body['details'] = self.details
        return body


class ValidationError(BridgeError):
    """Malformed or missing caller input (missing file, bad type, too big...)"""

    status_code = 400


class ProcessingError(BridgeError):
    """Input passed the shape checks but could not be decoded or transcoded"""

    status_code = 500
    public_message = 'Failed to create product'


class UpstreamError(BridgeError):
    """SUZURI returned a non-success status, an empty result, or was unreachable"""

    status_code = 500
    public_message = 'Failed to create product'

    def __init__(self, message, upstream_status=None, upstream_body=None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

    def __str__(self):
        if self.upstream_status:
            return f"{self.message} (status {self.upstream_status})"
        return self.message
