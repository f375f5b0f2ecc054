"""This is the processing submodule.

This module contains the streaming building blocks of the pipeline: the rolling
sample buffers, the window feature extraction, the classifier capability and the
background inference worker.
"""
