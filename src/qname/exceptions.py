class QualifiedNameError(Exception):
    pass


class InvalidSegmentError(QualifiedNameError, TypeError):
    def __init__(self, segment: object):
        self.segment = segment
        super().__init__(
            f"Cannot add {segment!r} to a qualified name: segments must be strings."
        )


class SegmentIndexError(QualifiedNameError, IndexError):
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(
            f"Segment index {index} is out of range for a name of {size} segment(s)."
        )
