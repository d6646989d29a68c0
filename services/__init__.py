from flask import current_app


def get_tmdb():
    return current_app.extensions["tmdb"]


def get_pexels():
    return current_app.extensions["pexels"]


def get_video_pool():
    return current_app.extensions["video_pool"]
