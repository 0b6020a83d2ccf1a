from application.dtos.blob_dtos import BlobRecordResponse
from domain.value_objects.blob_record import BlobRecord


class BlobMapper:
    @staticmethod
    def to_blob_record_response(record: BlobRecord) -> BlobRecordResponse:
        """Map a BlobRecord value object to a BlobRecordResponse DTO.

        Args:
            record: The BlobRecord to map

        Returns:
            BlobRecordResponse: The mapped response DTO

        """
        return BlobRecordResponse(
            file_id=record.file_id,
            filename=record.filename,
            length=record.length,
            content_type=record.content_type,
            metadata=record.metadata,
            upload_date=record.upload_date,
        )
