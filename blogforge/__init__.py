"""blogforge: research a website and write, edit and publish a blog post for it.

- wrapper / research: LLM generation and web research (OpenAI or Anthropic).
- fetch / publish: page scraping with requests + BeautifulSoup, Sanity publishing.
- pipeline: the staged orchestrator, its resilient extractor and the stage catalogue.
- entry / cli: create_blog() for embedding callers and the `blogforge` command.
"""
