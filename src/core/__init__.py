"""
Core modules for the Image Editor.

- image: pixel-level codecs and transforms (functional)
- image_handler: the ordered-operation transform engine
- image_merger: the merge pipeline
- font_cache: process-wide registered fonts
- worker_pool: bounded request execution
"""
