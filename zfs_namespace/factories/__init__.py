from .service_factory import ServiceFactory, ServiceFactoryBuilder, create_default_zfs

__all__ = ["ServiceFactory", "ServiceFactoryBuilder", "create_default_zfs"]
