from fastapi import APIRouter, Depends, File, Form, UploadFile
from notely.core.deps import get_current_user
from notely.models.user import User
from notely.schemas.storage import UploadResult
from notely.services.storage_service import BlobStorage, get_blob_storage, read_upload, upload_files
from typing import List, Optional

router = APIRouter(prefix="/storage", tags=["storage"])

@router.post("/upload", response_model=UploadResult)
def upload_file(
    file: UploadFile = File(...),
    folder: str = Form("notely"),
    storage: BlobStorage = Depends(get_blob_storage),
    current_user: User = Depends(get_current_user)
):
    """Upload d'un fichier (image, vidéo, pdf, doc, texte), 10MB max"""
    results = upload_files(storage, [(file.filename, file.content_type, read_upload(file.file, file.filename))], folder)
    return results[0]

@router.post("/upload/multiple", response_model=List[UploadResult])
def upload_multiple(
    files: List[UploadFile] = File(...),
    folder: str = Form("notely"),
    storage: BlobStorage = Depends(get_blob_storage),
    current_user: User = Depends(get_current_user)
):
    payload = [(f.filename, f.content_type, read_upload(f.file, f.filename)) for f in files]
    return upload_files(storage, payload, folder)

@router.get("/url/{public_id:path}")
def optimized_url(
    public_id: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Optional[str] = None,
    format: Optional[str] = None,
    storage: BlobStorage = Depends(get_blob_storage),
    current_user: User = Depends(get_current_user)
):
    # URL avec redimensionnement / qualité / format appliqués par le fournisseur
    url = storage.optimized_url(public_id, width=width, height=height, quality=quality, format=format)
    return {"url": url}

@router.delete("/{public_id:path}")
def delete_file(public_id: str, storage: BlobStorage = Depends(get_blob_storage), current_user: User = Depends(get_current_user)):
    storage.delete(public_id)
    return {"message": "File deleted successfully"}
