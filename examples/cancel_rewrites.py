import asyncio

from dotenv import load_dotenv

from markup_toolkit import BatchCancelledError, Config, StyleAnalysisRequest, style_batch_rewrites

load_dotenv()


async def main() -> None:
    """Start fifty rewrites and cancel the batch after two seconds."""
    config = Config.from_env()
    requests = [
        StyleAnalysisRequest(
            content=f"Document {index + 1}: This is test content for batch processing.",
            style_guide="ap",
            document_name=f"large-batch-doc-{index + 1}.txt",
        )
        for index in range(50)
    ]
    handle = style_batch_rewrites(requests, config, {"max_concurrent": 10})

    await asyncio.sleep(2)
    print("Cancelling batch operation...")
    handle.cancel()

    try:
        await handle
    except BatchCancelledError as error:
        print(f"Batch was cancelled: {error}")

    progress = handle.progress
    print(
        f"{progress.completed} completed, {progress.failed} failed, "
        f"{progress.in_progress} still in flight, {progress.pending} never started"
    )


if __name__ == "__main__":
    asyncio.run(main())
