import datetime


class Logger:
    '''Provides functionality for writing messages to a log file.
    '''

    def __init__(self, filename: str) -> None:
        self.filename = filename

    def clear(self) -> None:
        with open(self.filename, 'w') as fp:
            fp.write('')

    def log(self, msg: str) -> None:
        timestamp = str(datetime.datetime.now())
        with open(self.filename, 'a') as fp:
            fp.write(f'{timestamp}: {msg}\n')
