# prompt templates for the completion provider
# both builders are pure: same inputs always give the same prompt

SEARCH_PROMPT_TEMPLATE = (
    "Analyze the following text and find all relevant information about '{topic}'. "
    "Only respond with information that meets all of the following criteria: "
    "1) The information you respond with should only be from the notes provided. "
    "Do not respond with any outside information. "
    "2) The information that you respond with should be directly about the topic given to you. "
    "Do not provide any loosely related information or general information that is not specific to the topic. "
    "3) Do not respond with any additional information. Only respond with information to answer the prompt. "
    "If you respond with more information than the topic necessitates, this will cause confusion. "
    "4) With your responses, try to deviate from the file content as little as possible. "
    "Only use your own words when necessary; otherwise, your responses should be as close to the file content as possible.\n"
    "Here is the file contents:\n\n"
)

EXPAND_PROMPT_TEMPLATE = "Provide an in-depth overview about '{topic}', summarizing key concepts:"


def search_prompt(topic: str, document_text: str) -> str:
    """Build the grounded search prompt, embedding the full document text"""
    # document text is appended rather than formatted so braces in the pdf are left alone
    return SEARCH_PROMPT_TEMPLATE.format(topic=topic) + document_text


def expand_prompt(topic: str) -> str:
    """Build the open-ended expansion prompt for a topic"""
    return EXPAND_PROMPT_TEMPLATE.format(topic=topic)
