import argparse
import asyncio
import logging
import os
import sys

# Add project root to path so we can import callsentiment
sys.path.append(os.getcwd())

from callsentiment.controllers.dependencies import get_fulfillment_pipeline
from callsentiment.pipelines.fulfillment import Job, JobState, Transition


async def main(contact_id: str, file_name: str) -> int:
    pipeline = get_fulfillment_pipeline()
    seen: list[Transition] = []
    pipeline.add_listener(seen.append)

    print(f"Running job contactId={contact_id} fileName={file_name}...")
    await pipeline.run(Job(contact_id=contact_id, file_name=file_name))

    print("\n--- State sequence ---")
    for transition in seen:
        stage = transition.stage.value if transition.stage else "-"
        print(f"{transition.elapsed:8.2f}s  {stage:<10} {transition.state.value}")
        if transition.error is not None:
            print(f"           {transition.error}")
    print("----------------------")

    final = seen[-1].state if seen else JobState.FAILED
    return 0 if final is JobState.DELETED else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Fulfil one recording notification in the foreground."
    )
    parser.add_argument("contact_id")
    parser.add_argument("file_name")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    sys.exit(asyncio.run(main(args.contact_id, args.file_name)))
