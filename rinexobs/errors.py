'''
Exceptions and warnings raised while reading RINEX observation data.

Fatal problems with a stream are one of:
    StructuralError : the header is missing, unterminated, or too long
    GrammarError    : a line does not have the expected layout
                      (including unknown satellite systems and bad PRNs)
    FieldValueError : a numeric field cannot be parsed
    StreamError     : the underlying line source failed
Non-fatal oddities are reported with warnings.warn(..., RinexWarning).
'''


class RinexError(Exception):
    '''Base class for errors in RINEX input.

    `lineno' is the line of the input where the problem was found, if known.
    '''
    def __init__(self, message, lineno=None):
        if lineno is not None:
            message = 'line ' + str(lineno) + ': ' + message
        Exception.__init__(self, message)
        self.lineno = lineno


class StructuralError(RinexError):
    '''The file is not organized as header followed by data records.'''


class GrammarError(RinexError, ValueError):
    '''A line does not match the fixed-column layout it should have.'''


class UnknownSystemError(GrammarError):
    '''A satellite system code is not one of G R E J C I S (M).'''


class FieldValueError(RinexError, ValueError):
    '''A numeric or time field could not be parsed.'''


class StreamError(RinexError):
    '''Reading from the underlying line source failed.

    The original exception (an OSError or a decoding error) is chained as
    __cause__.
    '''


class RinexWarning(UserWarning):
    '''Non-fatal irregularity in RINEX input.'''
