"""Read-only composed views over the entity store."""

from vidtube.services.views.channel_views import ChannelViews
from vidtube.services.views.comment_views import CommentViews
from vidtube.services.views.playlist_views import PlaylistViews
from vidtube.services.views.video_views import VideoViews

__all__ = ["ChannelViews", "CommentViews", "PlaylistViews", "VideoViews"]
