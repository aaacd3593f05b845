class StaticDocsError(Exception):
    pass


class SourceNotFound(StaticDocsError):
    pass


class TopicParsingError(StaticDocsError):
    pass


class RenderError(StaticDocsError):
    pass


class ExampleError(StaticDocsError):
    pass


class BuildError(StaticDocsError):
    pass


class ExtraNotInstalled(StaticDocsError):
    pass
