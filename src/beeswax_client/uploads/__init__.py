"""Binary asset uploads."""

from .creative_assets import CreativeAssetUploader, UploadState

__all__ = ["CreativeAssetUploader", "UploadState"]
