#!/usr/bin/env python3
"""Script to inspect the contents of the observation collection."""

import sys
import os

# Add the parent directory to the path so we can import memsync modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from memsync.chroma_sync import ChromaSync

def check_chromadb_contents(limit: int = 20):
    """Print what's actually stored in Chroma."""
    print("🔍 Inspecting observation collection...")
    
    try:
        collection = ChromaSync().get_collection()
        
        print(f"Collection: {collection.name}")
        print(f"Count: {collection.count()}")
        
        results = collection.get(limit=limit, include=["metadatas", "documents"])
        
        if results['ids']:
            print(f"\n📚 Showing {len(results['ids'])} documents:")
            print("-" * 60)
            
            for i, doc_id in enumerate(results['ids']):
                metadata = results['metadatas'][i]
                document = results['documents'][i]
                
                print(f"\nDocument {i+1}: {doc_id}")
                print(f"  Observation: {metadata.get('sqlite_id', 'Unknown')}")
                print(f"  Project: {metadata.get('project', 'Unknown')}")
                print(f"  Field: {metadata.get('field_type', 'Unknown')}")
                print(f"  Title: {metadata.get('title', 'Unknown')}")
                print(f"  Text Preview: {document[:100]}..." if len(document) > 100 else f"  Text: {document}")
                
        else:
            print("❌ No documents found in collection!")
            
    except Exception as e:
        print(f"❌ Error accessing ChromaDB: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    check_chromadb_contents(int(sys.argv[1]) if len(sys.argv) > 1 else 20)
