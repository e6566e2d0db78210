# image_fusion/data/texts/en.py
from image_fusion.data.constants import FusionAction

from .dto import ErrorTexts, LocaleTexts, PageTexts

texts = LocaleTexts(
    page=PageTexts(
        title="AI Image Fusion",
        subtitle=(
            "Merge two people into one scene. Upload two images, choose an "
            "interaction, and let Gemini create the magic."
        ),
        first_slot_label="First Person's Image",
        second_slot_label="Second Person's Image",
        upload_hint="Click to upload",
        action_label="Choose an action",
        fuse_button="Fuse Images",
        fuse_button_loading="Generating...",
        loading="Generating your image...",
        result_alt="Generated fusion",
        download_link="Download image",
    ),
    errors=ErrorTexts(
        read_failed="Failed to read image file.",
        missing_inputs="Please upload both images and select an action.",
        missing_api_key=(
            "GOOGLE__API_KEY is not set. Please configure it to use the Gemini API."
        ),
        no_image=(
            "The model did not return an image. "
            "Please try a different prompt or images."
        ),
        service_error="An error occurred: {error}",
        interrupted="The request was interrupted. Please try again.",
        unexpected="Something went wrong on our end. Please try again in a few moments.",
    ),
    action_labels={
        FusionAction.SHAKING_HANDS.value: "Shake Hands",
        FusionAction.HUGGING.value: "Hug Each Other",
        FusionAction.SALUTING.value: "Salute Each Other",
    },
)
