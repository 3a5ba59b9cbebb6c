"""Model weighting strategies for the aggregation engine."""

from typing import List

from weather_oracle.core.models import ModelName, ModelWeight, ModelWeightingStrategy


class EqualWeighting(ModelWeightingStrategy):
    """Every contributing model gets weight 1/N."""

    reason = "Equal weighting"

    def weigh(self, models: List[ModelName]) -> List[ModelWeight]:
        if not models:
            return []
        weight = 1.0 / len(models)
        return [ModelWeight(model=m, weight=weight, reason=self.reason) for m in models]
