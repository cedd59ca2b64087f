"""Switch NuGet package references in a Visual Studio solution to local DLL references."""

__version__ = "0.1.0"
