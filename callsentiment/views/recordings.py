"""Schema for recording-available webhook notifications."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from callsentiment.pipelines.fulfillment import Job


class RecordingNotification(BaseModel):
    contact_id: StrictStr = Field(alias="contactId")
    file_name: StrictStr = Field(alias="fileName")

    model_config = ConfigDict(populate_by_name=True)

    def to_job(self) -> Job:
        return Job(contact_id=self.contact_id, file_name=self.file_name)
