from admin_panel.core.collection import CollectionService
from admin_panel.modules.tips.generator import TipGenerator
from admin_panel.modules.tips.schemas import TipCreate, TipResponse, TIP_ICON
from typing import Any, Dict, List, Optional


class TipService(CollectionService):
    table = "health_tips"
    response_model = TipResponse
    label = "Tip"

    def _to_row(self, payload: TipCreate) -> Dict[str, Any]:
        return {**payload.model_dump(), "icon": TIP_ICON}

    def _to_update(self, payload: TipCreate) -> Dict[str, Any]:
        return {**payload.model_dump(exclude_unset=True), "icon": TIP_ICON}

    def generate_and_insert(self, generator: TipGenerator, count: int, api_key: Optional[str]) -> List[TipResponse]:
        """AI tips land in one batch insert, so a failure leaves nothing behind"""
        return self.bulk_create(generator.generate(count, api_key))
