class Config:
    def __init__(
        self,
        unknown_limit: int = 10,
        indent: int = 2,
        **kwargs
    ):
        # number of unrecognized objects listed by the summary command
        self.unknown_limit = unknown_limit
        # JSON indentation used by the dump command
        self.indent = indent
        self.__dict__.update(kwargs)
