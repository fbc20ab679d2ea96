"""Tag-aware monitoring wrapper around a pluggable metrics backend."""