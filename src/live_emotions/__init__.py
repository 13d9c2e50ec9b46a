# Live emotion overlay: face detection over camera or screen video
__version__ = "0.1.0"
