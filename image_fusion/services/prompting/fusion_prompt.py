# image_fusion/services/prompting/fusion_prompt.py
from image_fusion.data.constants import FusionAction

PROMPT_FUSION = (
    "From the two images provided, create a new photorealistic image where the "
    "person from the first image and the person from the second image are "
    "{action}. The background should be neutral and the interaction between the "
    "two people should look natural and believable."
)


def build_fusion_prompt(action: FusionAction | str) -> str:
    """Embeds the chosen interaction verbatim into the fusion instruction."""
    action_text = action.value if isinstance(action, FusionAction) else action
    return PROMPT_FUSION.format(action=action_text)
