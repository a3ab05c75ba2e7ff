"""
Run the CV pipeline against local files (no server needed).
Run from the project folder:

    python optimize_cv.py job_description.txt my_cv.pdf [--pdf optimized_cv.pdf]
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.stdout.reconfigure(encoding='utf-8', errors='replace')


async def main(job_path: Path, cv_path: Path, pdf_out: Path | None) -> int:
    from cvbuddy.dependencies import get_ai_service, get_document_parser, get_renderer
    from cvbuddy.config import get_settings
    from cvbuddy.domain.errors import CVBuddyError
    from cvbuddy.services.cv_pipeline import CVOptimizationPipeline, PDF_MEDIA_TYPE, validate_submission

    try:
        submission = validate_submission(
            job_description=job_path.read_text(encoding="utf-8"),
            cv_bytes=cv_path.read_bytes(),
            cv_content_type=PDF_MEDIA_TYPE if cv_path.suffix.lower() == ".pdf" else None,
            cv_filename=cv_path.name,
        )
        pipeline = CVOptimizationPipeline(
            ai=get_ai_service(get_settings()),
            documents=get_document_parser(),
            settings=get_settings(),
        )

        print("[1/2] Analyzing job description and optimizing CV...")
        result = await pipeline.run(submission)
    except CVBuddyError as e:
        print(f"  FAIL - {type(e).__name__}: {json.dumps(e.to_body(), indent=2)}")
        return 1

    print("\n=== Job analysis ===")
    print(json.dumps(result.job_analysis, indent=2))
    print("\n=== Optimized CV ===")
    print(result.optimized_cv)

    if pdf_out:
        pdf_out.write_bytes(get_renderer().render(result.optimized_cv))
        print(f"\n[2/2] Wrote {pdf_out}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tailor a CV to a job description.")
    parser.add_argument("job_description", type=Path, help="Text file with the job description")
    parser.add_argument("cv", type=Path, help="CV in PDF format")
    parser.add_argument("--pdf", type=Path, default=None, help="Also write the optimized CV as a PDF")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.job_description, args.cv, args.pdf)))
