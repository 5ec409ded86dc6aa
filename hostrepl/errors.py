class ReplError(Exception):
    """ Base class for all hostrepl errors"""
    pass

class ConfigError(ReplError):
    """ Raised when a configuration key or value is invalid"""

class BindError(ReplError):
    """ Raised when the listening socket cannot be created or bound"""

class RequestError(ReplError):
    """ Raised when a client line is not a valid evaluate request"""

class CompileError(ReplError):
    """ Raised when source text compiles neither as an expression nor as statements"""

    def __init__(self, diagnostic: str):
        super().__init__(diagnostic)
        self.diagnostic = diagnostic

class ReplTimeout(ReplError):
    """ Raised when the client gives up waiting for a server message"""
