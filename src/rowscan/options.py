from dataclasses import dataclass

from libb import ConfigOptions

__all__ = ['ScanOptions', 'DEFAULT_OPTIONS']


@dataclass
class ScanOptions(ConfigOptions):
    """Options

    - tag: dataclass field metadata key holding a field's column name
    - embed_key: metadata key marking a field whose record is embedded
    - coerce: convert row values to the destination's declared type
    """
    tag: str = 'db'
    embed_key: str = 'embed'
    coerce: bool = True

    def __post_init__(self):
        if not isinstance(self.tag, str) or not self.tag:
            raise ValueError('tag must be a non-empty string')
        if not isinstance(self.embed_key, str) or not self.embed_key:
            raise ValueError('embed_key must be a non-empty string')
        if self.tag == self.embed_key:
            raise ValueError('tag and embed_key must differ')


DEFAULT_OPTIONS = ScanOptions()
