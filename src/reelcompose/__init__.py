"""reelcompose — timed script + still image to short-form video.

Render a narration script (ordered, timed segments) over a single product
image into a compressed video container, frame by frame, with captions,
a per-segment progress bar and a countdown.
"""
