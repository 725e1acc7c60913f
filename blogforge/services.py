"""The external capabilities a pipeline run depends on, bundled for injection."""
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Services:
    generate: Callable[[str], str]
    research: Callable[[str], str]
    fetch: Callable[[str], dict]
    publish: Callable[[dict], dict]

    @classmethod
    def default(cls) -> "Services":
        """Provider-backed capabilities: LLM_PROVIDER for text, requests for HTTP, Sanity for publishing."""
        from blogforge import fetch, publish, research, wrapper

        return cls(
            generate=wrapper.generate,
            research=research.search,
            fetch=fetch.fetch_page,
            publish=publish.publish_document,
        )
