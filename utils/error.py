class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        """
        Error raised to the caller, flask turns it into a json response
        :param message: readable reason
        :param status_code: http status, the class default if None
        :param payload: extra fields for the response body
        """
        Exception.__init__(self, message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['error'] = self.__class__.__name__
        return rv


class NotFoundError(ServiceError):
    """
    Unknown cuboid, layout, cube or segment id
    """
    status_code = 404


class ContractViolationError(ServiceError):
    """
    The caller broke the contract of the spanning tree, never retried
    """
    status_code = 409
