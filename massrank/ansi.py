
SILENT = False


def fore_red() -> None:
    print('\033[31m', end = '')

def fore_yellow() -> None:
    print('\033[33m', end = '')

def fore_cyan() -> None:
    print('\033[36m', end = '')


def ansi_reset() -> None:
    print('\033[0m', end = '')


def message(prefix: str, colour, text: str) -> None:
    ''' Print ``text`` after a coloured ``prefix``, unless silenced. '''
    if SILENT: return
    colour()
    print(prefix, end = ' ')
    ansi_reset()
    print(text, flush = True)


def error(text: str, error = None, kind = Exception) -> None:
    '''
    Print an error message and raise ``kind(text)``, chained from ``error`` 
    when one is given. Raises without printing when the console is silenced.
    '''
    message('[error]', fore_red, text)

    if error is None: raise kind(text)
    else: raise kind(text) from error


def warning(text: str) -> None: message('[!]', fore_yellow, text)
def info(text: str) -> None: message('[i]', fore_cyan, text)


def format_probability(p):
    if p is None: return 'none'
    if p == 0 or 1e-3 <= abs(p) < 1e3: return f'{p:.4f}'
    return f'{p:.3e}'

