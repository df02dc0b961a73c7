from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict


class ChatImageUrl(BaseModel):
	"""Image attached to a ChatInput by URL (http(s) or data URI)."""

	model_config = ConfigDict(frozen=True)

	type: Literal["image_url"] = "image_url"
	url: str

	def to_input_content_parts(self) -> List[Dict[str, Any]]:
		return [
			{
				"type": "input_image",
				"image_url": self.url,
			}
		]

	def to_serialized(self) -> Dict[str, Any]:
		return {"type": self.type, "url": self.url}
