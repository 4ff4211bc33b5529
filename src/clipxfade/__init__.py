"""clipxfade — chain video clips with ffmpeg xfade transitions.

Join an ordered list of clips into a single video, with a crossfade-style
transition at every junction. The filter graph is compiled from clip
durations, a transition duration and a cyclic list of xfade effect names,
then handed to ffmpeg.
"""
