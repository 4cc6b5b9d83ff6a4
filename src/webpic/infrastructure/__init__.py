"""Infrastructure layer — Pillow codecs, EXIF extraction, filesystem writes.

This layer depends on stdlib and third-party imaging libs (Pillow,
pillow-heif, piexif).  It may use domain value types but never imports from
services, commands, or output.

Importing any module here registers the HEIC/HEIF opener with Pillow, so
both pixel decoding and EXIF extraction can open those sources.
"""

from pillow_heif import register_heif_opener

register_heif_opener()
