from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class PredictionResult:
    image_name: str
    class_index: int
    label: str
    top_k: List[Tuple[str, float]] = field(default_factory=list)

    def format_top_k(self):
        return "[" + ", ".join(f"({label}, {confidence:.6f})" for label, confidence in self.top_k) + "]"
