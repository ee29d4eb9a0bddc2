from typing import Any, Dict

IMAGE_MODEL_ID = "black-forest-labs/flux-schnell"

# Provider sentinels: seed -1 lets the provider pick randomness, loras None means no adapters.
IMAGE_REQUEST_DEFAULTS: Dict[str, Any] = {
    "model": IMAGE_MODEL_ID,
    "response_format": "b64_json",
    "response_extension": "png",
    "width": 1024,
    "height": 1024,
    "num_inference_steps": 4,
    "negative_prompt": "",
    "seed": -1,
    "loras": None,
}


def get_image_generation_request(prompt: str) -> Dict[str, Any]:
    """Return the upstream image request for ``prompt``.

    Only the prompt varies between calls; it is passed through untouched.
    """
    return {**IMAGE_REQUEST_DEFAULTS, "prompt": prompt}
