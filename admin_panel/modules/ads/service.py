from admin_panel.core.collection import CollectionService
from admin_panel.modules.ads.schemas import AdResponse


class AdService(CollectionService):
    table = "ads"
    response_model = AdResponse
    label = "Ad"
