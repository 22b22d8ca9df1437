import os
import json
import hashlib
import logging
from collections import OrderedDict
from typing import Dict, Any, Optional
import openai
from dotenv import load_dotenv

from .prompt_builder import build_system_prompt, build_user_prompt

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)

CACHE_SIZE = 256

class AIExplainer:
    """Narrative explanation of a ranked page. Never changes scores or order."""

    def __init__(self, api_key: Optional[str] = None, client=None, cache_size: int = CACHE_SIZE):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.client = client
        if self.client is None and self.api_key:
            self.client = openai.OpenAI(api_key=self.api_key)

        self.model = "gpt-4o-mini"
        self.max_tokens = 700
        self.temperature = 0.3

        # In-memory LRU: prompt digest -> response, at most cache_size entries
        self.cache_size = cache_size
        self.cache: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    def get_explanation(self, request_id: str, subject: Dict[str, Any], page: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Generates an explanation for a serialized recommendation page.
        Returns None if the API key is missing or the model call fails.
        """
        if not self.client:
            logger.warning("OpenAI API key not found. Skipping AI explanation.")
            return None

        system_prompt = build_system_prompt()
        user_prompt = build_user_prompt(subject, page)

        # Same subject and ranked page give the same prompt, whatever the request id
        key = hashlib.sha256(user_prompt.encode("utf-8")).hexdigest()
        if key in self.cache:
            self.cache.move_to_end(key)
            logger.info(f"AI explanation cache hit for request {request_id}")
            return self.cache[key]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"}
            )
        except openai.OpenAIError as e:
            logger.warning(f"Error generating AI explanation: {e}")
            return None

        content = response.choices[0].message.content
        if not content:
            return None

        try:
            parsed_content = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"AI explanation was not valid JSON: {e}")
            return None

        self.cache[key] = parsed_content
        if len(self.cache) > self.cache_size:
            self.cache.popitem(last=False)
        return parsed_content

# Singleton instance
explainer = AIExplainer()
