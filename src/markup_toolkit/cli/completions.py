from markup_toolkit.batching.api import BatchOperation
from markup_toolkit.style.models import Dialect, StyleGuideName, Tone


def complete_operation(value: str):
    for operation in BatchOperation.__members__.values():
        if operation.startswith(value):
            yield operation


def complete_dialect(value: str):
    for dialect in Dialect.__members__.values():
        if dialect.startswith(value):
            yield dialect


def complete_tone(value: str):
    for tone in Tone.__members__.values():
        if tone.startswith(value):
            yield tone


def complete_style_guide(value: str):
    for style_guide in StyleGuideName.__members__.values():
        if style_guide.startswith(value):
            yield style_guide
