"""Which stored files of an item can be merged into a single PDF."""

from keyword_vault.config import IMAGE_EXTENSIONS, MERGED_PREFIX
from keyword_vault.models.item import Item


def file_extension(path: str) -> str:
    _, dot, ext = path.rpartition(".")
    return ext.lower() if dot else ""


def is_pdf(path: str) -> bool:
    return file_extension(path) == "pdf"


def is_image(path: str) -> bool:
    return file_extension(path) in IMAGE_EXTENSIONS


def mergeable_files(item: Item) -> list[str]:
    """Attached files of an item, minus PDFs produced by an earlier merge."""
    return [f for f in item.files if MERGED_PREFIX not in f]


def validate_merge(files: list[str]) -> None:
    """Raise ValueError unless files can be merged (2+ files, all PDF or image)."""
    if len(files) < 2:
        msg = "At least 2 files are required for merging"
        raise ValueError(msg)
    invalid = [f for f in files if not is_pdf(f) and not is_image(f)]
    if invalid:
        msg = f"All files must be PDF or images, got: {invalid!r}"
        raise ValueError(msg)
