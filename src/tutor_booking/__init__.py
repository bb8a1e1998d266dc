'''
Tutor booking engine: availability, conflict detection and tutor matching.
'''
