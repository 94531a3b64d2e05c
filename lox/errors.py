##################################
############CLASSES###############
##################################
class ParseError(RuntimeError):
    pass
##################################
class Runtime_Error(Exception):
    def __init__(self, token, message):
        self.token = token
        self.message = message
        Exception.__init__(self, message)
##################################
class InterpreterError(Exception):
    """The resolver and interpreter disagree about scopes; this is a bug, not a user error."""
    pass
