##################################
############IMPORTS###############
##################################
from enum import Enum
##################################
############CLASSES###############
##################################
# Every statement execution returns None to continue normally, or one of
# these to unwind. Loops consume the LoopSignal values, calls consume
# Return_Value; blocks and ifs just pass them upward.
class LoopSignal(Enum):
    BREAK = "break"
    CONTINUE = "continue"
##################################
class Return_Value:
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Return_Value({self.value!r})"
