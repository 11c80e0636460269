from .downloader import ARCHIVE_MEMBER_SEPARATOR, Downloader, hex_to_base64, split_archive_member

__all__ = ["ARCHIVE_MEMBER_SEPARATOR", "Downloader", "hex_to_base64", "split_archive_member"]
