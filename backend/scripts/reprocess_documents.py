"""Reprocesa el OCR de todos los documentos, uno a la vez.

Por defecto procesa en este mismo proceso; con --remote invoca el endpoint HTTP de OCR
usando el token indicado.
"""
import sys
import os
import argparse
import time
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import SessionLocal
import app.models  # noqa: F401
from app.services.ocr_client import OCRClient
from app.services.ocr_service import reprocess_all_documents


def _print_progress(current: int, total: int):
    progress = (current / total) * 100 if total else 100.0
    print(f"Procesando {current}/{total} ({progress:.1f}%)")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--remote", action="store_true", help="Invoke the OCR HTTP endpoint instead of local extraction")
    parser.add_argument("--token", default=os.getenv("OCR_TOKEN", ""), help="Bearer token for --remote")
    parser.add_argument("--url", default=settings.OCR_SERVICE_URL, help="OCR endpoint URL for --remote")
    parser.add_argument("--delay", type=float, default=settings.OCR_REPROCESS_DELAY_SECONDS)
    args = parser.parse_args()

    if args.remote and not args.token:
        parser.error("--remote requires --token or OCR_TOKEN")

    processor = OCRClient(args.token, base_url=args.url).process if args.remote else None

    print("Iniciando reprocesamiento de todos los documentos...")
    started = time.time()
    db = SessionLocal()
    try:
        result = reprocess_all_documents(
            db,
            processor=processor,
            on_progress=_print_progress,
            delay_seconds=args.delay,
        )
    finally:
        db.close()

    print("Reprocesamiento completado.")
    print(f"Procesados correctamente: {result['success']}")
    print(f"Con errores: {result['failed']}")
    print(f"Omitidos (tipo no soportado): {result['skipped']}")
    print(f"Tiempo total: {time.time() - started:.1f} segundos")


if __name__ == "__main__":
    main()
