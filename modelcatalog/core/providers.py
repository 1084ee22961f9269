"""Built-in provider declarations.

Each entry names the library packages and input fields a provider offers. The
entries are plain data; ``modelcatalog.core.registry.build_registry`` turns them
into composed definitions.
"""

from __future__ import annotations

from typing import Tuple

from modelcatalog.core.composer import ProviderSpec
from modelcatalog.core.inputs import COMPLETION_PARAMS, api_key_input, override_input
from modelcatalog.core.packages import OPEN_SOURCE_POOL, autodetect, override_all, override_package
from modelcatalog.core.tags import ProviderTag

DEFAULT_FREE_TRIAL_LIMIT = 50

_OLLAMA_STEPS = (
    "To get started with Ollama, follow these steps:\n"
    "1. Download from [ollama.ai](https://ollama.ai/) and open the application\n"
    "2. Open a terminal and run `ollama run <MODEL_NAME>`. Example model names are "
    "`codellama:7b-instruct` or `llama2:7b-text`. You can find the full list "
    "[here](https://ollama.ai/library).\n"
    "3. Make sure that the model name used in step 2 is the same as the one in your "
    'configuration (e.g. `model="codellama:7b-instruct"`)\n'
    "4. Once the model has finished downloading, you can start asking questions."
)

_LMSTUDIO_STEPS = (
    "LM Studio provides a professional and well-designed GUI for exploring, configuring, "
    "and serving LLMs. It is available on both Mac and Windows. To get started:\n"
    "1. Download from [lmstudio.ai](https://lmstudio.ai/) and open the application\n"
    "2. Search for and download the desired model from the home screen of LM Studio.\n"
    "3. In the left-bar, click the '<->' icon to open the Local Inference Server and "
    "press 'Start Server'.\n"
    "4. Once your model is loaded and the server has started, you can begin chatting."
)

_LLAMACPP_STEPS = (
    "llama.cpp comes with a [built-in server]"
    "(https://github.com/ggerganov/llama.cpp/tree/master/examples/server) "
    "that can be run from source. To do this:\n\n"
    "1. Clone the repository with `git clone https://github.com/ggerganov/llama.cpp`.\n"
    "2. `cd llama.cpp`\n"
    "3. Run `make` to build the server.\n"
    "4. Download the model you'd like to use and place it in the `llama.cpp/models` "
    "directory.\n"
    "5. Run the llama.cpp server with the command below, replacing the model with the "
    "one you downloaded:\n\n"
    "```shell\n"
    ".\\server.exe -c 4096 --host 0.0.0.0 -t 16 --mlock -m "
    "models/codellama-7b-instruct.Q8_0.gguf\n"
    "```\n\n"
    "After it's up and running, you can start chatting."
)

_OPENAI_COMPATIBLE_GUIDES = (
    "If you are using any other OpenAI-compatible API, you can simply enter your server "
    "URL. If you still need to set up your model server, you can follow a guide below:\n\n"
    "- [text-gen-webui](https://github.com/oobabooga/text-generation-webui/tree/main/"
    "extensions/openai#setup--installation)\n"
    "- [LocalAI](https://localai.io/basics/getting_started/)\n"
    "- [llama-cpp-python](https://github.com/continuedev/ggml-server-example)\n"
    "- [FastChat](https://github.com/lm-sys/FastChat/blob/main/docs/openai_api.md)"
)


def builtin_provider_specs(free_trial_limit: int = DEFAULT_FREE_TRIAL_LIMIT) -> Tuple[ProviderSpec, ...]:
    """Declarations for every provider shipped with the catalog, in display order."""
    return (
        ProviderSpec(
            key="openai",
            identity={
                "title": "OpenAI",
                "provider": "openai",
                "description": "Use gpt-4, gpt-3.5-turbo, or any other OpenAI model",
                "long_description": (
                    "Use gpt-4, gpt-3.5-turbo, or any other OpenAI model. See "
                    "[here](https://openai.com/product#made-for-developers) to obtain an API key."
                ),
                "icon": "openai.png",
                "tags": [ProviderTag.REQUIRES_API_KEY],
                "api_key_url": "https://platform.openai.com/account/api-keys",
            },
            packages=("gpt_4o", "gpt_4_turbo", "gpt_35_turbo", autodetect("OpenAI")),
            inputs=(api_key_input("OpenAI"), COMPLETION_PARAMS),
        ),
        ProviderSpec(
            key="anthropic",
            identity={
                "title": "Anthropic",
                "provider": "anthropic",
                "ref_page": "anthropicllm",
                "description": (
                    "Anthropic builds state-of-the-art models with large context length "
                    "and high recall"
                ),
                "long_description": (
                    "To get started with Anthropic models, you first need to sign up for the "
                    "open beta [here](https://claude.ai/login) to obtain an API key."
                ),
                "icon": "anthropic.png",
                "tags": [ProviderTag.REQUIRES_API_KEY],
                "api_key_url": "https://console.anthropic.com/account/keys",
            },
            packages=("claude_3_opus", "claude_3_sonnet", "claude_3_haiku"),
            inputs=(
                api_key_input("Anthropic"),
                COMPLETION_PARAMS,
                override_input("context_length", default_value=100_000),
            ),
        ),
        ProviderSpec(
            key="mistral",
            identity={
                "title": "Mistral API",
                "provider": "mistral",
                "description": (
                    "The Mistral API provides seamless access to their models, including "
                    "Codestral, Mistral 8x22B, Mistral Large, and more."
                ),
                "long_description": (
                    "To get access to the Mistral API, obtain your API key from "
                    "[here](https://console.mistral.ai/codestral) for Codestral or the "
                    "[Mistral platform](https://docs.mistral.ai/) for all other models."
                ),
                "icon": "mistral.png",
                "tags": [ProviderTag.REQUIRES_API_KEY, ProviderTag.OPEN_SOURCE],
                "params": {"apiKey": ""},
                "api_key_url": "https://console.mistral.ai/codestral",
            },
            packages=(
                "codestral",
                "mistral_large",
                "mistral_small",
                "mistral_8x22b",
                "mistral_8x7b",
                "mistral_7b",
            ),
            inputs=(api_key_input("Mistral"), COMPLETION_PARAMS),
        ),
        ProviderSpec(
            key="ollama",
            identity={
                "title": "Ollama",
                "provider": "ollama",
                "description": (
                    "One of the fastest ways to get started with local models on Mac, "
                    "Linux, or Windows"
                ),
                "long_description": _OLLAMA_STEPS,
                "icon": "ollama.png",
                "tags": [ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE],
                "download_url": "https://ollama.ai/",
            },
            packages=(autodetect("Ollama"), OPEN_SOURCE_POOL),
            inputs=(
                COMPLETION_PARAMS,
                override_input("api_base", default_value="http://localhost:11434"),
            ),
        ),
        ProviderSpec(
            key="cohere",
            identity={
                "title": "Cohere",
                "provider": "cohere",
                "ref_page": "cohere",
                "description": (
                    "Optimized for enterprise generative AI, search and discovery, and "
                    "advanced retrieval."
                ),
                "long_description": (
                    "To use Cohere, visit the [Cohere dashboard]"
                    "(https://dashboard.cohere.com/api-keys) to create an API key."
                ),
                "icon": "cohere.png",
                "tags": [ProviderTag.REQUIRES_API_KEY],
            },
            packages=("command_r", "command_r_plus"),
            inputs=(api_key_input("Cohere"), COMPLETION_PARAMS),
        ),
        ProviderSpec(
            key="groq",
            identity={
                "title": "Groq",
                "provider": "groq",
                "description": (
                    "Groq is the fastest LLM provider by a wide margin, using 'LPUs' to serve "
                    "open-source models at blazing speed."
                ),
                "long_description": (
                    "To get started with Groq, obtain an API key from their website "
                    "[here](https://wow.groq.com/)."
                ),
                "icon": "groq.png",
                "tags": [ProviderTag.REQUIRES_API_KEY, ProviderTag.OPEN_SOURCE],
                "api_key_url": "https://console.groq.com/keys",
            },
            packages=(
                "llama3_70b_chat",
                "llama3_8b_chat",
                override_package("mixtral_trial", title="Mixtral"),
                "llama2_70b_chat",
                autodetect("Groq"),
                None,
            ),
            inputs=(api_key_input("Groq"),),
        ),
        ProviderSpec(
            key="together",
            identity={
                "title": "TogetherAI",
                "provider": "together",
                "ref_page": "togetherllm",
                "description": (
                    "Use the TogetherAI API for extremely fast streaming of open-source models"
                ),
                "long_description": (
                    "Together is a hosted service that provides extremely fast streaming of "
                    "open-source language models. To get started with Together:\n"
                    "1. Obtain an API key from [here](https://together.ai)\n"
                    "2. Paste below\n"
                    "3. Select a model preset"
                ),
                "icon": "together.png",
                "tags": [ProviderTag.REQUIRES_API_KEY, ProviderTag.OPEN_SOURCE],
                "params": {"apiKey": ""},
            },
            packages=(
                override_all(
                    ["llama3_chat", "code_llama_instruct", "mistral_os"],
                    params={"contextLength": 4096},
                ),
            ),
            inputs=(api_key_input("TogetherAI"), COMPLETION_PARAMS),
        ),
        ProviderSpec(
            key="gemini",
            identity={
                "title": "Google Gemini API",
                "provider": "gemini",
                "ref_page": "geminiapi",
                "description": "Try out Google's state-of-the-art Gemini model from their API.",
                "long_description": (
                    "To get started with Google Gemini API, obtain your API key from "
                    "[here](https://ai.google.dev/tutorials/workspace_auth_quickstart) "
                    "and paste it below."
                ),
                "icon": "gemini.png",
                "tags": [ProviderTag.REQUIRES_API_KEY],
                "api_key_url": "https://aistudio.google.com/app/apikey",
            },
            packages=("gemini_15_pro", "gemini_pro", "gemini_15_flash"),
            inputs=(api_key_input("Gemini"),),
        ),
        ProviderSpec(
            key="lmstudio",
            identity={
                "title": "LM Studio",
                "provider": "lmstudio",
                "description": (
                    "One of the fastest ways to get started with local models on Mac or Windows"
                ),
                "long_description": _LMSTUDIO_STEPS,
                "icon": "lmstudio.png",
                "tags": [ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE],
                "params": {"apiBase": "http://localhost:1234/v1/"},
                "download_url": "https://lmstudio.ai/",
            },
            packages=(autodetect("LM Studio"), OPEN_SOURCE_POOL),
            inputs=(COMPLETION_PARAMS,),
        ),
        ProviderSpec(
            key="llamafile",
            identity={
                "title": "llamafile",
                "provider": "llamafile",
                "description": "llamafiles are a self-contained binary to run an open-source LLM",
                "long_description": (
                    "To get started with llamafiles, find and download a binary on their "
                    "[GitHub repo](https://github.com/Mozilla-Ocho/llamafile?tab=readme-ov-file"
                    "#quickstart). Then run it with the following command:\n\n"
                    "```shell\nchmod +x ./llamafile\n./llamafile\n```"
                ),
                "icon": "llamafile.png",
                "tags": [ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE],
                "download_url": (
                    "https://github.com/Mozilla-Ocho/llamafile?tab=readme-ov-file#quickstart"
                ),
            },
            packages=(OPEN_SOURCE_POOL,),
            inputs=(COMPLETION_PARAMS,),
        ),
        ProviderSpec(
            key="replicate",
            identity={
                "title": "Replicate",
                "provider": "replicate",
                "ref_page": "replicatellm",
                "description": "Use the Replicate API to run open-source models",
                "long_description": (
                    "Replicate is a hosted service that makes it easy to run ML models. "
                    "To get started with Replicate:\n"
                    "1. Obtain an API key from [here](https://replicate.com)\n"
                    "2. Paste below\n"
                    "3. Select a model preset"
                ),
                "icon": "replicate.png",
                "tags": [ProviderTag.REQUIRES_API_KEY, ProviderTag.OPEN_SOURCE],
                "params": {"apiKey": ""},
                "api_key_url": "https://replicate.com/account/api-tokens",
            },
            packages=("llama3_chat", "code_llama_instruct", "wizard_coder", "mistral_os"),
            inputs=(api_key_input("Replicate"), COMPLETION_PARAMS),
        ),
        ProviderSpec(
            key="llamacpp",
            identity={
                "title": "llama.cpp",
                "provider": "llama.cpp",
                "ref_page": "llamacpp",
                "description": "If you are running the llama.cpp server from source",
                "long_description": _LLAMACPP_STEPS,
                "icon": "llamacpp.png",
                "tags": [ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE],
                "download_url": "https://github.com/ggerganov/llama.cpp",
            },
            packages=(OPEN_SOURCE_POOL,),
            inputs=(COMPLETION_PARAMS,),
        ),
        ProviderSpec(
            key="openai-aiohttp",
            identity={
                "title": "Other OpenAI-compatible API",
                "provider": "openai",
                "description": (
                    "If you are using any other OpenAI-compatible API, for example "
                    "text-gen-webui, FastChat, LocalAI, or llama-cpp-python, you can simply "
                    "enter your server URL"
                ),
                "long_description": _OPENAI_COMPATIBLE_GUIDES,
                "icon": "openai.png",
                "tags": [ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE],
                "params": {"apiBase": ""},
            },
            packages=(autodetect("OpenAI"), OPEN_SOURCE_POOL),
            inputs=(
                override_input("api_base", default_value="http://localhost:8000/v1/"),
                COMPLETION_PARAMS,
            ),
        ),
        ProviderSpec(
            key="freetrial",
            identity={
                "title": "Limited free trial",
                "provider": "free-trial",
                "ref_page": "freetrial",
                "description": (
                    "New users can try out models for free using a proxy server that securely "
                    "makes calls to OpenAI, Anthropic, or Together using our API key"
                ),
                "long_description": (
                    "New users can try out models for free using a proxy server that securely "
                    "makes calls to OpenAI, Anthropic, or Together using our API key. If you "
                    "are ready to set up a model for long-term use or have used all "
                    f"{free_trial_limit} free uses, you can enter your API key or use a local "
                    "model."
                ),
                "icon": "openai.png",
                "tags": [ProviderTag.FREE],
            },
            packages=(
                "codellama_70b_trial",
                override_package("gpt_4o", title="GPT-4o (trial)"),
                override_package("gpt_35_turbo", title="GPT-3.5-Turbo (trial)"),
                override_package("claude_3_sonnet", title="Claude 3 Sonnet (trial)"),
                override_package("claude_3_haiku", title="Claude 3 Haiku (trial)"),
                "mixtral_trial",
                override_package("gemini_15_pro", title="Gemini 1.5 Pro (trial)"),
                autodetect("Free Trial"),
            ),
            inputs=(COMPLETION_PARAMS,),
        ),
    )


__all__ = ["DEFAULT_FREE_TRIAL_LIMIT", "builtin_provider_specs"]
