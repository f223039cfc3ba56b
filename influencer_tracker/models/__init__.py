# Import every model so relationship() string targets always resolve
from influencer_tracker.models.influencer import Influencer  # noqa: F401
from influencer_tracker.models.post import Post  # noqa: F401
from influencer_tracker.models.scrap_job import ScrapJob  # noqa: F401
