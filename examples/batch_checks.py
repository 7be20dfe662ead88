import asyncio

from dotenv import load_dotenv

from markup_toolkit import (
    BatchItemStatus,
    Config,
    StyleAnalysisRequest,
    style_batch_check_requests,
    style_batch_suggestions,
)

load_dotenv()


def build_requests() -> list[StyleAnalysisRequest]:
    """Build three documents analysed against different style guides."""
    return [
        StyleAnalysisRequest(
            content="This is the first document for style analysis. It contains multiple sentences.",
            style_guide="ap",
            document_name="document-1.txt",
        ),
        StyleAnalysisRequest(
            content="Second document with different content and style requirements.",
            style_guide="chicago",
            tone="informal",
            document_name="document-2.txt",
        ),
        StyleAnalysisRequest(
            content="Third document using British English and formal tone.",
            style_guide="microsoft",
            dialect="british_oxford",
            document_name="document-3.txt",
        ),
    ]


async def check_documents(config: Config) -> None:
    """Check every document, two at a time, and print its quality score."""
    handle = style_batch_check_requests(
        build_requests(),
        config,
        {"max_concurrent": 2, "retry_attempts": 3, "retry_delay": 1000},
    )
    print(f"Initial progress: {handle.progress.in_progress} in progress out of {handle.progress.total}")

    result = await handle
    print(f"Final result: {result.completed} completed, {result.failed} failed")
    for record in result.results:
        if record.status == BatchItemStatus.COMPLETED:
            print(f"Document {record.index + 1}: score {record.result.quality_score}")
        else:
            print(f"Document {record.index + 1}: failed - {record.error.message}")


async def suggest_with_progress(config: Config) -> None:
    """Collect suggestions one document at a time while printing progress."""
    handle = style_batch_suggestions(build_requests(), config, {"max_concurrent": 1})
    while not handle.done():
        progress = handle.progress
        print(f"Progress: {progress.completed}/{progress.total} completed, {progress.in_progress} in progress")
        await asyncio.wait({handle.future}, timeout=1)

    result = await handle
    for record in result.results:
        if record.status == BatchItemStatus.COMPLETED:
            print(f"Document {record.index + 1}: {len(record.result.issues)} suggestions found")


async def main() -> None:
    """Run the batch examples."""
    config = Config.from_env()
    await check_documents(config)
    await suggest_with_progress(config)


if __name__ == "__main__":
    asyncio.run(main())
